"""
VMware Host Suspend Helper GUI
"""

from .tray import TrayApp, pick_vmx_files

__all__ = ["TrayApp", "pick_vmx_files"]
