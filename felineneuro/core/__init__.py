"""
Diagnosis core: clinical rules and engines, input validation, chat.
"""
