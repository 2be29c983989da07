"""Fact tasks, query helpers, and the extractor, validator, aggregator and processor that run them."""