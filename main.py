#!/usr/bin/env python3
"""
Main entry point for the Expense Tracker client
"""

from expense_client.main import run

if __name__ == "__main__":
    run()
