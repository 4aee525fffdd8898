"""Vending offer planner and OpenKore shop-config synchronizer."""
