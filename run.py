"""
Entry Point Script (Bootstrap)
==============================
Starts the chart gallery from a source checkout, without installing it.

Why is this file needed?
------------------------
1. It is located outside the 'src' package to act as a convenient runner.
2. It puts 'src' on 'sys.path' so that 'import chartgallery' resolves to the
   working tree.

Usage:
    $ python run.py --chart line-selector
"""
import os
import sys

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

appid = 'ChartGallery.Gallery'  # Arbitrary string
try:
    import ctypes
    # Windows taskbar grouping uses this id instead of python.exe's
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(appid)
except (AttributeError, ImportError):
    # Not on Windows or ctypes not available
    pass

from chartgallery.main import main

if __name__ == "__main__":
    main()
