from pagecheck.reporting.junit import JUnitExporter
from pagecheck.reporting.summary import Reporter

__all__ = ["JUnitExporter", "Reporter"]
