"""
Historical sample series used to backfill statistics.

Both series are indexed by day of year modulo their length, so any date
(past, present or future) maps to a stable value.
"""

from datetime import date, datetime, timedelta
from typing import Tuple, Union

# Daily transaction counts
TRANSACTIONS_PER_DAY: Tuple[int, ...] = (
    310337, 313589, 290827, 297579, 307336, 309952, 297193, 290252, 298334, 299165, 295980,
    314983, 304301, 310709, 316025, 301995, 290314, 304104, 300348, 297674, 316931, 301925,
    316524, 290471, 303144, 304190, 296886, 317507, 295057, 295209, 300387, 311270, 291703,
    315558, 295660, 302128, 298574, 296363, 302307, 313384, 309288, 309477, 296264, 303867,
    316629, 298503, 312869, 310598, 309085, 315671, 307676, 308296, 290160, 310894, 288048,
    316307, 309786, 295976, 294780, 294503, 294628, 290956, 311250, 299018, 295754, 299098,
    302487, 302264, 291887, 295181, 315754, 295970, 312541, 291290, 297825, 312461, 292620,
    303766, 290851, 303907, 299573, 289672, 312845, 287575, 289242, 292281, 305656, 302450,
    308555, 294846, 305088, 299615, 317490, 293178, 306621, 299233, 310967, 288450, 289391,
    304788,
)

# Daily closing prices (USD)
PRICES: Tuple[float, ...] = (
    16.6281278, 17.58357529, 19.93815045, 20.06231797, 20.09033456, 15.60569456, 20.73913126,
    23.8023505, 23.70194863, 25.06192243, 23.03510121, 21.09756818, 21.3849601, 18.45689417,
    19.98396848, 20.09016498, 19.17659903, 20.69405557, 23.17878297, 27.48400726, 28.59779156,
    29.94846584, 31.36078032, 35.92982346, 28.76324295, 27.15187109, 26.89085403, 23.93834545,
    23.2289697, 23.87426273, 18.04466817, 17.38999974, 19.29365877, 21.00631071, 19.63032521,
    19.6584171, 19.62915806, 17.33868885, 17.28368522, 16.65447174, 16.80148965, 16.11220961,
    15.54426834, 14.6635775, 13.79773345, 13.88375094, 14.21692831, 16.27441916, 16.0240564,
    16.19392927, 17.23121829, 17.06375764, 8.76220576, 13.52029943, 12.91980016, 13.19695492,
    17.62882155, 16.37329418, 12.70904661, 12.82851447, 13.97149339, 14.27648811, 12.04525542,
    11.8032347, 13.87211414, 13.9170336, 13.36739245, 13.24298631, 12.60285729, 12.24952636,
    12.32249269, 11.94716386, 11.96618666, 12.58966848, 10.80896246, 14.38125675, 14.73902796,
    13.10992837, 12.91440305, 13.18443959, 13.385099, 13.08299092, 13.62372015, 15.17900978,
    12.97646833, 12.99243794, 14.34198228, 14.58535171, 13.82917744, 14.82477908, 15.64444703,
    13.93375996, 16.53689396, 17.84700421, 16.86642115, 14.27428707, 15.16815528, 17.18411013,
    14.61807672, 16.48574617,
)


def day_of_year(when: Union[date, datetime]) -> int:
    """
    Day of the year (1 - 366) of the specified date.

    Counted as whole days since December 31 of the previous year,
    so January 1 is day 1. Any time of day is ignored.
    """
    day = when.date() if isinstance(when, datetime) else when
    return (day - date(day.year - 1, 12, 31)) // timedelta(days=1)


def get_num_transactions(when: Union[date, datetime]) -> int:
    return TRANSACTIONS_PER_DAY[day_of_year(when) % len(TRANSACTIONS_PER_DAY)]


def get_price(when: Union[date, datetime]) -> float:
    return PRICES[day_of_year(when) % len(PRICES)]
