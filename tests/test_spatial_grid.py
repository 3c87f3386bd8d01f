from spatial_grid import SpatialIndex


def test_grid_dimensions_cover_viewport() -> None:
    grid = SpatialIndex(100.0, 950.0, 420.0)
    assert grid.grid_width == 10
    assert grid.grid_height == 5


def test_neighbors_exclude_self_and_span_adjacent_cells(make_spark) -> None:
    grid = SpatialIndex(100.0, 800.0, 600.0)
    center = make_spark(150.0, 150.0)
    same_cell = make_spark(160.0, 120.0)
    adjacent = make_spark(205.0, 150.0)  # next column over
    diagonal = make_spark(99.0, 99.0)  # previous column and row
    far = make_spark(700.0, 500.0)
    grid.rebuild([center, same_cell, adjacent, diagonal, far])

    neighbors = grid.neighbors_of(center)
    assert center not in neighbors
    assert same_cell in neighbors
    assert adjacent in neighbors
    assert diagonal in neighbors
    assert far not in neighbors


def test_corner_cells_clip_to_grid(make_spark) -> None:
    grid = SpatialIndex(100.0, 300.0, 300.0)
    corner = make_spark(0.0, 0.0)
    other = make_spark(299.0, 299.0)
    grid.rebuild([corner, other])
    assert grid.neighbors_of(corner) == []
    assert grid.cell_of(other) == (2, 2)


def test_clear_and_rebuild_forget_previous_frame(make_spark) -> None:
    grid = SpatialIndex(50.0, 200.0, 200.0)
    a = make_spark(10.0, 10.0)
    b = make_spark(20.0, 20.0)
    grid.rebuild([a, b])
    assert len(grid) == 2

    b.position[:] = (190.0, 190.0)
    grid.rebuild([a, b])
    assert len(grid) == 2
    assert grid.neighbors_of(a) == []

    grid.clear()
    assert len(grid) == 0


def test_resize_changes_cell_count(make_spark) -> None:
    grid = SpatialIndex(100.0, 1920.0, 1080.0)
    assert (grid.grid_width, grid.grid_height) == (20, 11)
    grid.resize(960.0, 540.0)
    assert (grid.grid_width, grid.grid_height) == (10, 6)
    assert len(grid) == 0
