from pagecheck.automation.base import AutomationError, BaseAutomation
from pagecheck.automation.memory import InMemoryAutomation, Page

__all__ = ["AutomationError", "BaseAutomation", "InMemoryAutomation", "Page"]
