"""
Demonstrates both readiness mixins: objects start their heavy initialization when they are created,
their methods wait for the initialization before doing anything.

Run with ::

    python examples/heavy_initial_computations.py --delay 0.5 -v
"""
from __future__ import annotations

import argparse
import asyncio
import logging

from ensure_initialized import (
    EnsureInitializedMixin,
    EnsureInitializedResultMixin,
    logging_setup,
    parse_args,
)

log = logging.getLogger('heavy_initial_computations')


class HeavyInitialComputations(EnsureInitializedMixin):
    def __init__(self, delay: float):
        # start the initialization in the constructor, or make it public and call it after creating the object
        self.delay = delay
        self._init_task = asyncio.create_task(self._init())

    async def _heavy_computations(self):
        await asyncio.sleep(self.delay)

    async def _init(self):
        try:
            await self._heavy_computations()
        except Exception as e:
            self.initialized_with_error(error=e, trace=e.__traceback__)
        else:
            self.initialized_successfully()

    async def do_something(self) -> int:
        """
        This method waits for the object to be initialized before doing its stuff.
        """
        await self.ensure_initialized
        return 25


class HeavyInitialComputationsResult(EnsureInitializedResultMixin[str]):
    def __init__(self, delay: float):
        self.delay = delay
        self._init_task = asyncio.create_task(self._init())

    async def _heavy_computations(self) -> str:
        await asyncio.sleep(self.delay)
        return 'I am initialized!'

    async def _init(self):
        try:
            result = await self._heavy_computations()
        except Exception as e:
            self.initialized_with_error(error=e, trace=e.__traceback__)
        else:
            self.initialized_successfully(result)

    async def do_something(self) -> str:
        """
        This method waits for the object to be initialized before doing its stuff.
        """
        init_result = await self.ensure_initialized
        return f"Upper cased: {init_result.upper()}"


async def main(delay: float):
    log.info("=== W/O Result ===")
    computations = HeavyInitialComputations(delay)
    computations.when_initialized.listen(lambda _: log.info("When initialized is fired!"))

    try:
        log.info("Calling do_something ...")
        data = await computations.do_something()
        log.info(f"do_something result: {data}")
    except Exception:
        log.exception("Unable to do something")

    # give the listener the chance to run before the next object is created
    await asyncio.sleep(0.1)

    log.info("=== W/ Result ===")
    computations_result = HeavyInitialComputationsResult(delay)
    computations_result.when_initialized.listen(
        lambda result: log.info(f"When initialized with result is fired! The result is: {result}")
    )

    try:
        log.info("Calling do_something ...")
        data = await computations_result.do_something()
        log.info(f"do_something result: {data}")
    except Exception:
        log.exception("Unable to do something")

    await asyncio.sleep(0.1)


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('--delay', type=float, default=3., help='duration of the heavy computations in seconds')
    args = parse_args(parser=parser)

    with logging_setup.change(config={'incremental': True, 'loggers': {'heavy_initial_computations': {
        'level': 'INFO', 'handlers': ['console'], 'propagate': False
    }}}):
        asyncio.run(main(args.delay))
