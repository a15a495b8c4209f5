"""
Utility functions and helpers for Warden.

- **logger.py**: Centralized logging configuration with colored console output
  and per-session rotating log files
- **discord_utils.py**: Best-effort message deletion, replies and sends
- **embeds.py**: Embed palette and user-authored color validation
- **format_utils.py**: Text helpers (ASCII conversion, truncation)
- **permissions.py**: Member capability levels
- **background.py**: Owner of detached fire-and-forget tasks
"""
