import sys
import os

# Add the repository root to the Python path so the tests can import
# 'hiercache' without the package being installed.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
