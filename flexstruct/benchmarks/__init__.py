# flexstruct/benchmarks - Textbook problems for flexible structures
"""
BENCHMARKS
==========

Each module sets up one published benchmark and returns the quantities that
are compared with the reference values:

    twisted_beam.py    MacNeal-Harder twisted cantilever (shells, static)
    argyris_frame.py   Prestressed L-frame: frequency vs load, buckling
    ring_modal.py      NAFEMS free ring: modal convergence, Richardson
    garteur.py         GARTEUR SM-AG19 aeroplane test-bed: geometry, modes
    plate.py           NAFEMS FV12 plate: free modes, explicit transient
"""
