#!/usr/bin/env python3
"""
Table metadata generator CLI.

Usage:
    python -m tablegen [--path DIR] [--file-prefix PREFIX]

Examples:
    python -m tablegen --path ./models
    python -m tablegen -path ./models -filePrefix gen_
"""

from __future__ import annotations

from tablegen.model_codegen.main import main

if __name__ == "__main__":
    main()
