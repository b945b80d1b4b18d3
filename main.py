#!/usr/bin/env python3
"""
Main entry point for the LAN chat server
"""

from lanchat.main import run

if __name__ == "__main__":
    run()
