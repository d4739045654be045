#!/usr/bin/env python3
"""
Route handlers for the f1tv-api local service
"""

import os
import sys

# Add lib path for imports - this will be executed when routes module is imported
script_dir = os.path.dirname(os.path.abspath(__file__))
app_dir = os.path.dirname(script_dir)
LIB_PATH = os.path.join(app_dir, "lib")
if os.path.exists(LIB_PATH) and LIB_PATH not in sys.path:
    sys.path.insert(0, LIB_PATH)

from .session import setup_session_routes
from .content import setup_content_routes

__all__ = [
    'setup_session_routes',
    'setup_content_routes'
]
