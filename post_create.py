#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the devcontainer postCreateCommand.
"""

from bootstrapper.cli import cli

if __name__ == "__main__":
    cli(prog_name="workspace-bootstrap")
