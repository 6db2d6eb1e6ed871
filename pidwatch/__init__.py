"""Single-process memory and CPU sampler with a one-shot summary report."""

__version__ = "0.1.0"
