"""
Warden - Discord message moderation pipeline

Warden runs every guild message through a fixed sequence of policy stages
and keeps per-community configuration in SQLite.

Core Components:

- **Settings**: Lazily created per-guild configuration (roles, link
  permissions, keyword triggers) cached for the process lifetime
- **Auto slow-mode**: Adjusts a channel's slow-mode delay to its message rate
- **Link policy**: Deletes links from members who may not post them
- **Phrase moderation**: Approximate matching of banned phrases, reported to
  log channels
- **Triggers**: Cooldown-gated keyword reminders with a per-user opt-out
- **Invite previews**: Summaries of the guilds behind posted invite links

Usage:
    from warden.main import main
    main()
"""
