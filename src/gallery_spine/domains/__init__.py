"""Domain packages. Each may define pipelines.register_<name>_pipelines."""
