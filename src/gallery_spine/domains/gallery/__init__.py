"""
Gallery catalog domain.

Modules:
- models: source record, tag keys, candidates, output rows
- parser: namespace field decoding
- classifier: validity rule for example candidates
- aggregation: streaming per-tag counters and candidate pools
- ranking: candidate ranking and output ordering
- distribution: dumped date histogram
- repository: source catalog and output store access
- pipelines: registered pipelines
"""
