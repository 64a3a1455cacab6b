# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/__init__.py
"""
netcompat: SUSE sysconfig network configuration to a normalized interface model.
"""
__version__ = "0.1.0"
