"""
Interface package: communication protocols for the engine.

Modules:
    uci : Universal Chess Interface handler with a Power option.
          Run as: python -m interface.uci
"""
