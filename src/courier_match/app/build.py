# courier_match/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from courier_match.app.dispatch import DeliveryDispatcher
from courier_match.app.engine import MatchEngine
from courier_match.app.hooks import NoopHooks
from courier_match.app.protocols import AgentDirectory, AssignmentStore, DeliveryTracker
from courier_match.config.models import EngineModel
from courier_match.io.match_logging import MatchLogging  # JSON logs
from courier_match.io.recorder import JsonlSink, Recorder
from courier_match.runtime.clock import Clock
from courier_match.runtime.policy_factory import (
    make_eligibility_policy,
    make_pricing_policy,
    make_scoring_policy,
)
from courier_match.runtime.services_factory import make_clock, make_travel_time


@dataclass
class App:
    config: EngineModel
    clock: Clock
    engine: MatchEngine
    dispatcher: DeliveryDispatcher | None = None
    recorder: Recorder | None = None


def build(
    cfg: EngineModel | Mapping | None = None,
    *,
    directory: AgentDirectory | None = None,
    store: AssignmentStore | None = None,
    tracker: DeliveryTracker | None = None,
    recorder: Recorder | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    if cfg is None:
        model = EngineModel()
    else:
        model = cfg if isinstance(cfg, EngineModel) else EngineModel.model_validate(cfg)

    # 1) Clock
    clock = make_clock(model.clock)

    # 2) Hooks & recorder
    if recorder is None and model.log.record_events:
        recorder = Recorder(JsonlSink())
    hooks = (
        MatchLogging(
            run_id=model.name,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            recorder=recorder,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Policies & services
    engine = MatchEngine(
        make_pricing_policy(model.pricing),
        make_travel_time(model.travel_time),
        clock,
        eligibility=make_eligibility_policy(model.eligibility),
        scoring=make_scoring_policy(model.scoring),
        top_n=model.matching.top_n,
        hooks=hooks,
    )

    # 4) Collaborators (optional: the engine alone is usable without them)
    dispatcher = (
        DeliveryDispatcher(engine, directory, store=store, tracker=tracker)
        if directory is not None
        else None
    )
    return App(model, clock, engine, dispatcher, recorder)
