"""
csitui - tiling terminal dashboard for Wi-Fi CSI measurement streams
"""

__version__ = "0.3.0"
