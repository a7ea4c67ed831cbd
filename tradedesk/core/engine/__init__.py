"""Decision engine entry points.

Responsibilities:
  - Run evaluators and the postprocess pipeline over one input snapshot.
  - Provide result types and read-side selectors for presentation layers.
  - Must not fetch data or execute CTAs.
"""
