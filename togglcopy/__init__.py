from togglcopy.toggl import client, sanitize, shift_entries

__all__ = ['client', 'sanitize', 'shift_entries']
