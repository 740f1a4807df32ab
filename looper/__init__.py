"""Broker looper: drives a fixed sequence of broker REST calls and reports timings."""
