"""
TeamHub - team/org membership and invitation lifecycle

Creates teams, invites members, accepts/rejects/withdraws invitations,
removes members and transfers ownership over a transactional document store.
"""

__version__ = "1.0.0"
