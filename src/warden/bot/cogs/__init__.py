"""
Cogs package for Warden.
Each module defines a cog class and a setup function to register it with the bot.
The cogs are loaded explicitly in main.py and receive their services there.
"""
