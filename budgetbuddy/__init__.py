"""
Budget Buddy

A personal budgeting calculator: enter income, allocate it across
categories, log expenses and track savings goals.

DESIGN PRINCIPLES:
1. Allocations never exceed income (fixed categories self-heal)
2. Every mutation leaves the model consistent before returning
3. Input is validated before it reaches the model
4. Every mutation is auditable
5. Presentation is a collaborator, not an owner, of the model
"""

__version__ = "1.0.0"
__author__ = "Budget Buddy Team"
