"""LLM Performance Modeler - predict latency and throughput from benchmark history."""

__version__ = "0.1.0"
