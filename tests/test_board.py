import unittest

import numpy as np

from rustris.game import (
    RotationDirection,
    Rustomino,
    RustominoType,
    RustrisBoard,
    SlotTag,
    TranslationDirection,
)


def count_tag(board, tag):
    return int(np.count_nonzero(board.grid.tags == tag))


class TestCollision(unittest.TestCase):
    def setUp(self):
        self.board = RustrisBoard()

    def test_walls_and_floor(self):
        check = self.board.check_collision
        self.assertTrue(check([(-1, 5), (0, 5), (1, 5), (2, 5)]))
        self.assertTrue(check([(7, 5), (8, 5), (9, 5), (10, 5)]))
        self.assertTrue(check([(4, -1), (4, 0), (4, 1), (4, 2)]))
        self.assertFalse(check([(0, 0), (9, 0), (0, 21), (9, 21)]))

    def test_no_ceiling(self):
        self.assertFalse(self.board.check_collision([(4, 22), (4, 23), (4, 30), (5, 40)]))

    def test_only_locked_slots_block(self):
        grid = self.board.grid
        grid.set_slot(4, 4, SlotTag.OCCUPIED, RustominoType.T)
        grid.set_slot(5, 4, SlotTag.GHOST, RustominoType.T)
        self.assertFalse(self.board.check_collision([(4, 4), (5, 4), (6, 4), (7, 4)]))
        grid.set_slot(6, 4, SlotTag.LOCKED, RustominoType.Z)
        self.assertTrue(self.board.check_collision([(4, 4), (5, 4), (6, 4), (7, 4)]))


class TestMovement(unittest.TestCase):
    def setUp(self):
        self.board = RustrisBoard()

    def test_empty_board_is_ready_for_next(self):
        self.assertTrue(self.board.ready_for_next())
        self.assertFalse(self.board.can_fall())
        self.assertFalse(self.board.translate_current(TranslationDirection.LEFT))
        self.assertFalse(self.board.rotate_current(RotationDirection.CW))
        self.assertIsNone(self.board.take_current())

    def test_set_current_writes_occupied_and_ghost(self):
        self.assertTrue(self.board.set_current_rustomino(Rustomino.spawn(RustominoType.T)))
        self.assertFalse(self.board.ready_for_next())
        for x, y in [(3, 20), (4, 20), (5, 20), (4, 21)]:
            self.assertEqual(SlotTag.OCCUPIED, self.board.grid.tag_at(x, y))
            self.assertEqual(RustominoType.T, self.board.grid.slot(x, y).kind)
        for x, y in [(3, 0), (4, 0), (5, 0), (4, 1)]:
            self.assertTrue(self.board.grid.slot(x, y).is_ghost())
        self.assertEqual(4, count_tag(self.board, SlotTag.OCCUPIED))
        self.assertEqual(4, count_tag(self.board, SlotTag.GHOST))

    def test_blocked_spawn_is_placed_but_reported(self):
        self.board.grid.set_slot(4, 20, SlotTag.LOCKED, RustominoType.O)
        self.assertFalse(self.board.set_current_rustomino(Rustomino.spawn(RustominoType.T)))
        self.assertEqual(SlotTag.OCCUPIED, self.board.grid.tag_at(4, 20))
        self.assertIsNotNone(self.board.current_rustomino)

    def test_translate_updates_grid(self):
        self.board.set_current_rustomino(Rustomino.spawn(RustominoType.I))
        self.assertTrue(self.board.translate_current(TranslationDirection.LEFT))
        self.assertEqual(SlotTag.EMPTY, self.board.grid.tag_at(6, 20))
        for x in range(2, 6):
            self.assertEqual(SlotTag.OCCUPIED, self.board.grid.tag_at(x, 20))
        self.assertEqual(4, count_tag(self.board, SlotTag.OCCUPIED))
        self.assertEqual(4, count_tag(self.board, SlotTag.GHOST))
        self.assertEqual({(2, 0), (3, 0), (4, 0), (5, 0)}, set(self.board.ghost_rustomino.board_slots()))

    def test_translate_refused_at_wall(self):
        self.board.set_current_rustomino(Rustomino.spawn(RustominoType.I))
        for _ in range(3):
            self.assertTrue(self.board.translate_current(TranslationDirection.LEFT))
        before = self.board.current_rustomino.board_slots()
        tags_before = self.board.grid.clone_tags()
        self.assertFalse(self.board.translate_current(TranslationDirection.LEFT))
        self.assertEqual(before, self.board.current_rustomino.board_slots())
        np.testing.assert_array_equal(tags_before, self.board.grid.tags)

    def test_translate_refused_by_locked_block(self):
        self.board.set_current_rustomino(Rustomino.spawn(RustominoType.O))
        self.board.grid.set_slot(6, 20, SlotTag.LOCKED, RustominoType.L)
        self.assertFalse(self.board.translate_current(TranslationDirection.RIGHT))
        self.assertTrue(self.board.translate_current(TranslationDirection.LEFT))

    def test_rotation_without_wall_kick(self):
        self.board.set_current_rustomino(Rustomino.spawn(RustominoType.I))
        self.assertTrue(self.board.rotate_current(RotationDirection.CW))
        self.assertEqual({(5, 18), (5, 19), (5, 20), (5, 21)}, set(self.board.current_rustomino.board_slots()))
        for _ in range(5):
            self.assertTrue(self.board.translate_current(TranslationDirection.LEFT))
        before = self.board.current_rustomino.board_slots()
        self.assertEqual({0}, {x for x, _ in before})
        # horizontal again would poke through the left wall
        self.assertFalse(self.board.rotate_current(RotationDirection.CW))
        self.assertEqual(before, self.board.current_rustomino.board_slots())
        self.assertEqual(1, self.board.current_rustomino.rotation)

    def test_apply_gravity_moves_one_row(self):
        self.board.set_current_rustomino(Rustomino.spawn(RustominoType.S))
        before = self.board.current_rustomino.board_slots()
        self.assertTrue(self.board.can_fall())
        self.board.apply_gravity()
        self.assertEqual([(x, y - 1) for x, y in before], self.board.current_rustomino.board_slots())
        self.assertEqual(4, count_tag(self.board, SlotTag.OCCUPIED))

    def test_take_current_returns_reset_piece(self):
        self.board.set_current_rustomino(Rustomino.spawn(RustominoType.L))
        self.board.rotate_current(RotationDirection.CW)
        self.board.apply_gravity()
        taken = self.board.take_current()
        self.assertEqual(Rustomino.spawn(RustominoType.L).board_slots(), taken.board_slots())
        self.assertTrue(self.board.ready_for_next())
        self.assertIsNone(self.board.ghost_rustomino)
        self.assertEqual(0, count_tag(self.board, SlotTag.OCCUPIED))
        self.assertEqual(0, count_tag(self.board, SlotTag.GHOST))


class TestDropAndLock(unittest.TestCase):
    def _junk_board(self):
        board = RustrisBoard()
        board.grid.fill([(0, 0), (1, 0), (1, 1), (4, 0), (4, 1), (4, 2), (5, 3), (8, 0)],
                        SlotTag.LOCKED, RustominoType.Z)
        return board

    def test_hard_drop_matches_repeated_gravity(self):
        for kind in RustominoType:
            for shift in range(-3, 4):
                stepped = self._junk_board()
                dropped = self._junk_board()
                for board in (stepped, dropped):
                    board.set_current_rustomino(Rustomino.spawn(kind))
                    direction = TranslationDirection.LEFT if shift < 0 else TranslationDirection.RIGHT
                    for _ in range(abs(shift)):
                        board.translate_current(direction)
                while stepped.can_fall():
                    stepped.apply_gravity()
                dropped.hard_drop()
                self.assertEqual(stepped.current_rustomino.board_slots(),
                                 dropped.current_rustomino.board_slots(), (kind.name, shift))

    def test_hard_drop_when_already_resting(self):
        board = RustrisBoard()
        board.set_current_rustomino(Rustomino.spawn(RustominoType.O))
        while board.can_fall():
            board.apply_gravity()
        self.assertEqual((0, 0), board.hard_drop_translation(board.current_rustomino))

    def test_i_piece_drops_to_floor(self):
        board = RustrisBoard()
        board.set_current_rustomino(Rustomino.spawn(RustominoType.I))
        board.hard_drop()
        board.lock_rustomino()
        for x in range(3, 7):
            self.assertTrue(board.grid.slot(x, 0).is_locked())
            self.assertEqual(RustominoType.I, board.grid.slot(x, 0).kind)
        self.assertEqual(4, count_tag(board, SlotTag.LOCKED))
        self.assertEqual(0, count_tag(board, SlotTag.OCCUPIED))
        self.assertEqual(0, count_tag(board, SlotTag.GHOST))
        self.assertTrue(board.ready_for_next())
        self.assertIsNone(board.ghost_rustomino)

    def test_ghost_hidden_under_resting_piece(self):
        board = RustrisBoard()
        board.set_current_rustomino(Rustomino.spawn(RustominoType.T))
        while board.can_fall():
            board.apply_gravity()
        self.assertEqual(board.current_rustomino.board_slots(), board.ghost_rustomino.board_slots())
        self.assertEqual(0, count_tag(board, SlotTag.GHOST))
        board.lock_rustomino()
        self.assertEqual(4, count_tag(board, SlotTag.LOCKED))


class TestLineClear(unittest.TestCase):
    def setUp(self):
        self.board = RustrisBoard()

    def _fill_row(self, y, skip=()):
        kinds = list(RustominoType)
        for x in range(10):
            if x not in skip:
                self.board.grid.set_slot(x, y, SlotTag.LOCKED, kinds[x % len(kinds)])

    def test_complete_lines_ignore_kind(self):
        self._fill_row(0)
        self._fill_row(1, skip=(9,))
        self._fill_row(3)
        self.assertEqual([0, 3], self.board.get_complete_lines())

    def test_occupied_row_is_not_complete(self):
        self._fill_row(0, skip=(3, 4, 5, 6))
        self.board.grid.fill([(3, 0), (4, 0), (5, 0), (6, 0)], SlotTag.OCCUPIED, RustominoType.I)
        self.assertEqual([], self.board.get_complete_lines())

    def test_no_complete_lines_is_noop(self):
        self._fill_row(0, skip=(0,))
        before = self.board.grid.clone_tags()
        self.assertEqual([], self.board.clear_completed_lines())
        np.testing.assert_array_equal(before, self.board.grid.tags)

    def test_single_line_scenario(self):
        self._fill_row(0, skip=(3, 4, 5, 6))
        self.board.grid.set_slot(0, 1, SlotTag.LOCKED, RustominoType.T)
        self.board.grid.set_slot(9, 2, SlotTag.LOCKED, RustominoType.S)
        self.board.set_current_rustomino(Rustomino.spawn(RustominoType.I))
        self.board.hard_drop()
        self.board.lock_rustomino()
        self.assertEqual([0], self.board.get_complete_lines())
        self.assertEqual([0], self.board.clear_completed_lines())
        self.assertEqual(RustominoType.T, self.board.grid.slot(0, 0).kind)
        self.assertTrue(self.board.grid.slot(9, 1).is_locked())
        self.assertEqual(2, count_tag(self.board, SlotTag.LOCKED))
        self.assertEqual([], self.board.get_complete_lines())

    def test_multiple_contiguous_lines(self):
        for y in range(4):
            self._fill_row(y)
        self.board.grid.set_slot(2, 4, SlotTag.LOCKED, RustominoType.J)
        self.board.grid.set_slot(2, 7, SlotTag.LOCKED, RustominoType.J)
        self.assertEqual([0, 1, 2, 3], self.board.clear_completed_lines())
        self.assertTrue(self.board.grid.is_locked(2, 0))
        self.assertTrue(self.board.grid.is_locked(2, 3))
        self.assertEqual(2, count_tag(self.board, SlotTag.LOCKED))

    def test_non_contiguous_lines(self):
        self._fill_row(0)
        self._fill_row(2)
        self.board.grid.set_slot(4, 1, SlotTag.LOCKED, RustominoType.O)
        self.board.grid.set_slot(7, 3, SlotTag.LOCKED, RustominoType.L)
        self.assertEqual([0, 2], self.board.clear_completed_lines())
        self.assertEqual(RustominoType.O, self.board.grid.slot(4, 0).kind)
        self.assertEqual(RustominoType.L, self.board.grid.slot(7, 1).kind)
        self.assertEqual(2, count_tag(self.board, SlotTag.LOCKED))

    def test_top_visible_rows_refilled_from_buffer(self):
        self._fill_row(0)
        self.board.grid.set_slot(5, 20, SlotTag.LOCKED, RustominoType.I)
        self.board.grid.set_slot(5, 21, SlotTag.LOCKED, RustominoType.I)
        self.board.clear_completed_lines()
        self.assertTrue(self.board.grid.is_locked(5, 19))
        self.assertTrue(self.board.grid.is_locked(5, 20))
        self.assertTrue(self.board.grid.slot(5, 21).is_empty())

    def test_buffer_rows_left_alone_when_not_compacting(self):
        board = RustrisBoard(compact_buffer_rows=False)
        board.grid.fill([(x, 0) for x in range(10)], SlotTag.LOCKED, RustominoType.T)
        board.grid.set_slot(5, 20, SlotTag.LOCKED, RustominoType.I)
        board.grid.set_slot(5, 21, SlotTag.LOCKED, RustominoType.I)
        board.grid.set_slot(1, 19, SlotTag.LOCKED, RustominoType.Z)
        self.assertEqual([0], board.clear_completed_lines())
        self.assertTrue(board.grid.is_locked(1, 18))
        self.assertTrue(board.grid.is_locked(5, 19))
        self.assertTrue(board.grid.is_locked(5, 20))
        self.assertTrue(board.grid.is_locked(5, 21))
        self.assertFalse(board.grid.is_locked(1, 19))


class TestDisplay(unittest.TestCase):
    def test_str_marks_slot_kinds(self):
        board = RustrisBoard()
        board.grid.set_slot(0, 0, SlotTag.LOCKED, RustominoType.I)
        board.set_current_rustomino(Rustomino.spawn(RustominoType.T))
        text = str(board)
        self.assertIn(" #", text)
        self.assertIn(" @", text)
        self.assertIn(" %", text)
        self.assertEqual(22 + 2, len(text.splitlines()))


if __name__ == '__main__':
    unittest.main()
