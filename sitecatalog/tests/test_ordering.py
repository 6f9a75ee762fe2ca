import unittest

from sitecatalog.errors import NotFoundError, ValidationError
from sitecatalog.ordering import Direction, next_order, plan_swap, sort_projects
from sitecatalog.types import Project


def make_project(project_id: str, order: int) -> Project:
    return Project(id=project_id, title=project_id.title(), image_url="/x.jpg", order=order)


class NextOrderTests(unittest.TestCase):
    def test_first_project_gets_one(self):
        self.assertEqual(next_order([]), 1)

    def test_appends_after_highest_and_skips_missing(self):
        self.assertEqual(next_order([3, None, 1]), 4)
        self.assertEqual(next_order([None]), 1)


class PlanSwapTests(unittest.TestCase):
    def setUp(self):
        # Deliberately unsorted and gapped.
        self.projects = [
            make_project("gamma", 9),
            make_project("alpha", 1),
            make_project("beta", 4),
        ]

    def test_sort_projects_by_order(self):
        self.assertEqual(
            [p.id for p in sort_projects(self.projects)], ["alpha", "beta", "gamma"]
        )

    def test_moving_up_swaps_with_previous(self):
        moved, neighbour = plan_swap(self.projects, "beta", "up")
        self.assertEqual((moved.id, moved.order), ("beta", 1))
        self.assertEqual((neighbour.id, neighbour.order), ("alpha", 4))

    def test_moving_down_swaps_with_next(self):
        moved, neighbour = plan_swap(self.projects, "beta", Direction.DOWN)
        self.assertEqual((moved.id, moved.order), ("beta", 9))
        self.assertEqual((neighbour.id, neighbour.order), ("gamma", 4))

    def test_ends_of_list_are_no_ops(self):
        self.assertIsNone(plan_swap(self.projects, "alpha", "up"))
        self.assertIsNone(plan_swap(self.projects, "gamma", "down"))
        self.assertIsNone(plan_swap([make_project("solo", 1)], "solo", "down"))

    def test_unknown_project_raises(self):
        with self.assertRaises(NotFoundError):
            plan_swap(self.projects, "delta", "up")

    def test_unknown_direction_raises(self):
        with self.assertRaises(ValidationError) as ctx:
            plan_swap(self.projects, "beta", "sideways")
        self.assertEqual(ctx.exception.field, "direction")


if __name__ == "__main__":
    unittest.main()
