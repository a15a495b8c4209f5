"""
Discord integration for Warden.

- **cogs/message_listener.py**: Hands every message to the moderation pipeline
- **cogs/events_listener.py**: Lifecycle logging, trigger opt-out buttons and
  guild removal
- **cogs/name_cmds.py**: "ASCII Name" user command
"""
