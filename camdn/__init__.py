"""CamDN: self-hosted media sharing with link-preview pages."""

__version__ = "0.1.0"
