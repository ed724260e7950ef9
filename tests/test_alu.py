import pytest

from chip8vm import alu


class TestAdd:

    def test_carry(self):
        assert alu.add(250, 10) == (4, 1)

    def test_no_carry(self):
        assert alu.add(250, 5) == (255, 0)


class TestSub:

    @pytest.mark.parametrize("a,b,expected", [
        (5, 3, (2, 1)),
        (3, 5, (254, 0)),
        (7, 7, (0, 1)),
        (0, 1, (255, 0)),
    ])
    def test_flag_is_not_borrow(self, a, b, expected):
        assert alu.sub(a, b) == expected


class TestShifts:

    def test_shr(self):
        assert alu.shr(0b101) == (0b10, 1)
        assert alu.shr(0b100) == (0b10, 0)

    def test_shl_raw_msb(self):
        # Classic behaviour keeps the masked byte, not 1
        assert alu.shl(0x81) == (0x02, 0x80)
        assert alu.shl(0x40) == (0x80, 0)

    def test_shl_normalized(self):
        assert alu.shl(0x81, normalize=True) == (0x02, 1)
        assert alu.shl(0x40, normalize=True) == (0x80, 0)
