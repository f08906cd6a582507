"""
The benchmark suite comparing ``listof()`` against ``listof_vararg()``.

Run it with ``listbench run``, or select a subset by name, e.g.
``listbench run -b 'list_chain'``.
"""
