"""
Benchmark suite for u8json parsing performance.

Compares u8json against established JSON readers:
- Python standard library json
- orjson (Rust-backed)
- ujson (C-backed)

Inputs are UTF-8 byte documents, the form u8json decodes itself.
"""
