# site_harvest/__init__.py
"""
SiteHarvest package initializer.
Defines package version and exposes the crawl entry points.
"""
__version__ = "0.1.0"

from site_harvest.engine import Engine, run_crawl  # noqa: E402
from site_harvest.cli import cli  # noqa: E402

__all__ = ["__version__", "Engine", "run_crawl", "cli"]
