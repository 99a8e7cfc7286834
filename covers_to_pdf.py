#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Download product cover images and lay them out on a landscape A4 PDF grid.
"""

# local repo modules
import cover_grid_pdf.cli


if __name__ == "__main__":
	cover_grid_pdf.cli.main()
