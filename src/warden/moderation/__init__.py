"""
Moderation stages of the message pipeline.

- **message_pipeline.py**: Runs the stages in order for every message
- **autoslow_controller.py**: Adaptive per-channel slow-mode
- **link_policy_gate.py**: URL detection and link permission checks
- **approximate_matcher.py** / **phrase_moderation_engine.py**: Banned phrases
- **cooldown_cache.py** / **trigger_engine.py**: Keyword reminders
- **invite_resolver.py**: Invite link previews
"""
