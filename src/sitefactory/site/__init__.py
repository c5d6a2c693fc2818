"""Manifest I/O and static site rendering."""

from sitefactory.site.manifest import Manifest, load_manifest, write_manifest
from sitefactory.site.render import BuildResult, SiteBuilder

__all__ = ["BuildResult", "Manifest", "SiteBuilder", "load_manifest", "write_manifest"]
