"""
Address Book - Account & Session Core

Registers users, authenticates them against hashed credentials, keeps
the user directory in a plain-text file and binds each login to that
user's own address book and preferences.

DESIGN PRINCIPLES:
1. Credentials are only ever held as opaque hashes
2. Fail early, fail visibly (typed errors, never printed)
3. The account file and the in-memory registry always agree
4. One user's data is never visible to another session
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Address Book Team"
