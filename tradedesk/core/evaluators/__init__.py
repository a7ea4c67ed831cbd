"""Signal evaluators for the decision engine.

Responsibilities:
  - Provide one deterministic evaluator per signal type.
  - Must not fetch data or share mutable state between evaluators.

Key definitions:
  - DecisionSnapshot and the individual eval_* modules in this package.

Inputs/Outputs:
  - Inputs: already-fetched domain records and the reference time.
  - Outputs: candidate DecisionItems for postprocessing.

Role in architecture:
  - Records → evaluators → postprocess pipeline → ordered action/intel lists.
"""
