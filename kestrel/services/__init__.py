"""Services shared by the cogs: persistence wrappers and announcements."""
