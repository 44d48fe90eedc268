"""Saudi payroll calculations: EOSB, GOSI, overtime and monthly payroll."""

__version__ = "0.1.0"
