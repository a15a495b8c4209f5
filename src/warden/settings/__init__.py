"""
Per-community state: settings service and cache, trigger opt-outs and
remembered names.
"""
