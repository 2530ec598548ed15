# tests/test_dof.py
import numpy as np
import pytest

from flexstruct.kernel.dof import DOFManager, DOF_3D_FRAME, free_dofs


def test_global_indices_six_dof_per_node():
    dof = DOFManager(dof_per_node=6)
    assert dof.idx(0, 0) == 0
    assert dof.idx(2, 4) == 16
    assert dof.ndof(5) == 30
    assert dof.node_dofs(1) == [6, 7, 8, 9, 10, 11]


def test_element_dof_map_follows_node_order():
    dof_map = DOF_3D_FRAME.element_dof_map([3, 1])
    assert dof_map == list(range(18, 24)) + list(range(6, 12))


def test_fixed_dofs_clamp_and_pin():
    clamp = DOF_3D_FRAME.fixed_dofs([0])
    assert clamp == [0, 1, 2, 3, 4, 5]

    pin = DOF_3D_FRAME.fixed_dofs([2, 3], local_dofs=[0, 1, 2])
    assert pin == [12, 13, 14, 18, 19, 20]


def test_fixed_dofs_rejects_invalid_local_dof():
    with pytest.raises(ValueError):
        DOF_3D_FRAME.fixed_dofs([0], local_dofs=[6])


def test_free_dofs_is_sorted_complement():
    free = free_dofs(8, [5, 0, 5, 3])
    np.testing.assert_array_equal(free, [1, 2, 4, 6, 7])


def test_free_dofs_without_supports():
    np.testing.assert_array_equal(free_dofs(4, []), [0, 1, 2, 3])
