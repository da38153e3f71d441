"""License Scanner - identify license texts using SPDX-style templates."""

__version__ = "0.1.0"
