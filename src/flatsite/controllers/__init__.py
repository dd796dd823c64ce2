"""Request controllers.

Controllers are plain classes whose constructors declare the services they
need. The container builds one per request.
"""

from flatsite.controllers.api import ApiPageController
from flatsite.controllers.pages import HomeController, PageController

__all__ = ["ApiPageController", "HomeController", "PageController"]
