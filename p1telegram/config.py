"""Defaults used to read P1 telegrams. Tweak to the local installation."""
import datetime

# A DSMR 4 meter talks 115200 8N1 on its P1 port.
serial_tty = '/dev/ttyUSB0'
baudrate = 115200
bytesize = 8
parity = 'N'
stopbits = 1
serial_timeout = 3.5

# seconds between two telegrams sent by the meter
telegram_interval = 10

read_chunk_size = 1024
handoff_queue_size = 1
# consecutive failed reads after which the frame reader gives up
max_read_errors = 3

# Meters carry local time plus a S(ummer)/W(inter) flag. The zone is fixed and
# never taken from the host.
CET = datetime.timezone(datetime.timedelta(hours=1), 'CET')
CEST = datetime.timezone(datetime.timedelta(hours=2), 'CEST')
timezones = {
    'S': CEST,
    'W': CET,
}
