"""Punctuality engine package.

Feature modules (schedules, policy, checkins, issues, actions, ...) keep the
rule logic in services that depend on repository protocols, with MySQL
repositories and a thin Flask controller layer around them.
"""
