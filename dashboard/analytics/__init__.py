"""Pure data helpers: search ranking, risk, profile completion, tables, exports.

Nothing in here talks to the backend; every function takes records and returns
new values without mutating its inputs.
"""
