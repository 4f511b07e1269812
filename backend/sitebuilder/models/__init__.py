from .theme import Theme
from .tenant import Tenant
from .block import SiteBlock
from .page import Page, Product, Post

__all__ = ["Theme", "Tenant", "SiteBlock", "Page", "Product", "Post"]
