"""
levsim - Package Launcher

Run with: python run_levsim.py
Shrink a run with LEVSIM_SIMULATIONS / LEVSIM_PERIOD_YEARS / LEVSIM_WORKERS.
"""
import sys
import os

# Ensure the package directory is on the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from levsim import run

if __name__ == "__main__":
    run()
