"""
boxinstaller — install a desktop application inside a distrobox sandbox.

Provisions an Ubuntu sandbox with distrobox, installs the application from
its vendor apt repository inside it, and exports the launcher to the host.
"""

__version__ = "0.1.0"
