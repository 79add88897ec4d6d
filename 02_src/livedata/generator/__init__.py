"""Sample generator module."""

from .sample_generator import ISampleGenerator, SampleGenerator

__all__ = ["ISampleGenerator", "SampleGenerator"]
