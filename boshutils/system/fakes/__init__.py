"""Fakes for tests: a recording command runner and in-memory file records."""