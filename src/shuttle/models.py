"""
Data model for event categories, teams and matches.

Every record can be turned into a plain dict with ``to_dict`` and rebuilt
with ``from_dict`` so callers can persist a whole category as one document.
"""

SINGLES = 'SINGLES'
DOUBLES = 'DOUBLES'
EVENT_TYPES = (SINGLES, DOUBLES)

SINGLE_ELIMINATION = 'SINGLE_ELIMINATION'
GROUP_STAGE_ELIMINATION = 'GROUP_STAGE_ELIMINATION'
FORMATS = (SINGLE_ELIMINATION, GROUP_STAGE_ELIMINATION)

PLAYIN = 'PLAYIN'
R128 = 'R128'
R64 = 'R64'
R32 = 'R32'
R16 = 'R16'
QF = 'QF'
SF = 'SF'
F = 'F'
THIRD_PLACE = '3RD'
GROUP = 'GROUP'
ROUND_KEYS = (PLAYIN, R128, R64, R32, R16, QF, SF, F, THIRD_PLACE, GROUP)

ROUND_NAMES = {
    PLAYIN: 'Play-in',
    R128: 'Round of 128',
    R64: 'Round of 64',
    R32: 'Round of 32',
    R16: 'Round of 16',
    QF: 'Quarterfinal',
    SF: 'Semifinal',
    F: 'Final',
    THIRD_PLACE: 'Third Place',
    GROUP: 'Group',
}

SLOT_A = 'A'
SLOT_B = 'B'

SOURCE_PAIR = 'PAIR'
SOURCE_WINNER_OF = 'WINNER_OF'
SOURCE_BYE = 'BYE'

DEFAULT_CLUB = 'Independent'


class Player:
    def __init__(self, id, name, club=DEFAULT_CLUB, code=''):
        self.id = id
        self.name = name
        self.club = club
        self.code = code

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'club': self.club, 'code': self.code}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['name'], data.get('club', DEFAULT_CLUB), data.get('code', ''))

    def __eq__(self, other):
        return isinstance(other, Player) and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Player(id={self.id}, name={self.name}, club={self.club})"


class Team:
    def __init__(self, id, code, players, club=None, seed=None):
        self.id = id
        self.code = code
        self.players = list(players)
        if club is None:
            club = self.players[0].club if self.players and self.players[0].club else DEFAULT_CLUB
        self.club = club
        self.seed = seed

    @property
    def name(self):
        return ' & '.join(p.name for p in self.players)

    def with_players(self, players):
        """Return a copy of this team holding ``players`` (id and club kept)."""
        return Team(self.id, self.code, players, club=self.club, seed=self.seed)

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'players': [p.to_dict() for p in self.players],
            'club': self.club,
            'seed': self.seed,
        }

    @classmethod
    def from_dict(cls, data):
        players = [Player.from_dict(p) for p in data.get('players', [])]
        return cls(data['id'], data.get('code', ''), players, club=data.get('club'), seed=data.get('seed'))

    def __eq__(self, other):
        return isinstance(other, Team) and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Team(id={self.id}, code={self.code}, name={self.name}, club={self.club})"


class MatchSource:
    """Where one side of a match comes from: a team, another match's winner, or a bye."""

    def __init__(self, type, team_id=None, match_id=None):
        self.type = type
        self.team_id = team_id
        self.match_id = match_id

    @classmethod
    def pair(cls, team_id):
        return cls(SOURCE_PAIR, team_id=team_id)

    @classmethod
    def winner_of(cls, match_id):
        return cls(SOURCE_WINNER_OF, match_id=match_id)

    @classmethod
    def bye(cls):
        return cls(SOURCE_BYE)

    @property
    def is_bye(self):
        return self.type == SOURCE_BYE

    def to_dict(self):
        data = {'type': self.type}
        if self.team_id is not None:
            data['team_id'] = self.team_id
        if self.match_id is not None:
            data['match_id'] = self.match_id
        return data

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        return cls(data['type'], team_id=data.get('team_id'), match_id=data.get('match_id'))

    def __eq__(self, other):
        return isinstance(other, MatchSource) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"MatchSource(type={self.type}, team_id={self.team_id}, match_id={self.match_id})"


class MatchLink:
    """Pointer to the slot of a later match that receives a team from this one."""

    def __init__(self, match_id, target_slot):
        self.match_id = match_id
        self.target_slot = target_slot

    def to_dict(self):
        return {'match_id': self.match_id, 'target_slot': self.target_slot}

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        return cls(data['match_id'], data['target_slot'])

    def __eq__(self, other):
        return isinstance(other, MatchLink) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"MatchLink(match_id={self.match_id}, target_slot={self.target_slot})"


_MATCH_FIELDS = (
    'id', 'round_key', 'round_index', 'position', 'slot_a', 'slot_b',
    'team_a', 'team_b', 'score_a', 'score_b', 'next_match', 'next_loser',
    'court', 'scheduled_time', 'group_id', 'match_number',
)


class Match:
    def __init__(self, id, round_key, round_index, position, slot_a=None, slot_b=None,
                 team_a=None, team_b=None, score_a=None, score_b=None,
                 next_match=None, next_loser=None, court=None, scheduled_time=None,
                 group_id=None, match_number=None):
        self.id = id
        self.round_key = round_key
        self.round_index = round_index
        self.position = position
        self.slot_a = slot_a
        self.slot_b = slot_b
        self.team_a = team_a
        self.team_b = team_b
        self.score_a = score_a
        self.score_b = score_b
        self.next_match = next_match
        self.next_loser = next_loser
        self.court = court
        self.scheduled_time = scheduled_time
        self.group_id = group_id
        self.match_number = match_number

    def copy(self, **changes):
        """Return a new Match with ``changes`` applied; teams are shared, not cloned."""
        values = {name: getattr(self, name) for name in _MATCH_FIELDS}
        unknown = set(changes) - set(values)
        if unknown:
            raise TypeError(f"Unknown match fields: {sorted(unknown)}")
        values.update(changes)
        return Match(**values)

    @property
    def is_ready(self):
        return self.team_a is not None and self.team_b is not None

    def get_team(self, slot):
        return self.team_a if slot == SLOT_A else self.team_b

    def to_dict(self):
        return {
            'id': self.id,
            'round_key': self.round_key,
            'round_index': self.round_index,
            'position': self.position,
            'slot_a': self.slot_a.to_dict() if self.slot_a else None,
            'slot_b': self.slot_b.to_dict() if self.slot_b else None,
            'team_a': self.team_a.to_dict() if self.team_a else None,
            'team_b': self.team_b.to_dict() if self.team_b else None,
            'score_a': self.score_a,
            'score_b': self.score_b,
            'next_match': self.next_match.to_dict() if self.next_match else None,
            'next_loser': self.next_loser.to_dict() if self.next_loser else None,
            'court': self.court,
            'scheduled_time': self.scheduled_time,
            'group_id': self.group_id,
            'match_number': self.match_number,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['id'],
            data['round_key'],
            data['round_index'],
            data['position'],
            slot_a=MatchSource.from_dict(data.get('slot_a')),
            slot_b=MatchSource.from_dict(data.get('slot_b')),
            team_a=Team.from_dict(data['team_a']) if data.get('team_a') else None,
            team_b=Team.from_dict(data['team_b']) if data.get('team_b') else None,
            score_a=data.get('score_a'),
            score_b=data.get('score_b'),
            next_match=MatchLink.from_dict(data.get('next_match')),
            next_loser=MatchLink.from_dict(data.get('next_loser')),
            court=data.get('court'),
            scheduled_time=data.get('scheduled_time'),
            group_id=data.get('group_id'),
            match_number=data.get('match_number'),
        )

    def __eq__(self, other):
        return isinstance(other, Match) and self.to_dict() == other.to_dict()

    def __repr__(self):
        team_a = self.team_a.code if self.team_a else None
        team_b = self.team_b.code if self.team_b else None
        return (f"Match(id={self.id}, round={self.round_key}, position={self.position}, "
                f"teams=({team_a}, {team_b}), score=({self.score_a}, {self.score_b}))")


class TeamStats:
    def __init__(self, team_id, played=0, won=0, lost=0, points=0, diff=0):
        self.team_id = team_id
        self.played = played
        self.won = won
        self.lost = lost
        self.points = points
        self.diff = diff

    def to_dict(self):
        return {
            'team_id': self.team_id,
            'played': self.played,
            'won': self.won,
            'lost': self.lost,
            'points': self.points,
            'diff': self.diff,
        }

    def __eq__(self, other):
        return isinstance(other, TeamStats) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"TeamStats(team_id={self.team_id}, played={self.played}, won={self.won}, "
                f"lost={self.lost}, points={self.points}, diff={self.diff})")


class Group:
    def __init__(self, id, name, teams, matches=None):
        self.id = id
        self.name = name
        self.teams = list(teams)
        self.matches = list(matches) if matches else []

    @property
    def rankings(self):
        # Always derived from the current scores
        from shuttle.groups import calculate_group_rankings
        return calculate_group_rankings(self)

    def with_matches(self, matches):
        return Group(self.id, self.name, self.teams, matches)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'teams': [t.to_dict() for t in self.teams],
            'matches': [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['id'],
            data['name'],
            [Team.from_dict(t) for t in data.get('teams', [])],
            [Match.from_dict(m) for m in data.get('matches', [])],
        )

    def __repr__(self):
        return f"Group(id={self.id}, name={self.name}, teams={len(self.teams)}, matches={len(self.matches)})"


class EventCategory:
    def __init__(self, id, name, event_type=DOUBLES, format=SINGLE_ELIMINATION,
                 players=None, teams=None, matches=None, groups=None, is_draw_done=False,
                 has_third_place_match=True, teams_per_group=4, advance_per_group=2):
        self.id = id
        self.name = name
        self.event_type = event_type
        self.format = format
        self.players = list(players) if players else []
        self.teams = list(teams) if teams else []
        self.matches = list(matches) if matches else []
        self.groups = list(groups) if groups else []
        self.is_draw_done = is_draw_done
        self.has_third_place_match = has_third_place_match
        self.teams_per_group = teams_per_group
        self.advance_per_group = advance_per_group

    def copy(self, **changes):
        values = self.__dict__.copy()
        values.update(changes)
        return EventCategory(**values)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'event_type': self.event_type,
            'format': self.format,
            'players': [p.to_dict() for p in self.players],
            'teams': [t.to_dict() for t in self.teams],
            'matches': [m.to_dict() for m in self.matches],
            'groups': [g.to_dict() for g in self.groups],
            'is_draw_done': self.is_draw_done,
            'has_third_place_match': self.has_third_place_match,
            'teams_per_group': self.teams_per_group,
            'advance_per_group': self.advance_per_group,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['id'],
            data['name'],
            event_type=data.get('event_type', DOUBLES),
            format=data.get('format', SINGLE_ELIMINATION),
            players=[Player.from_dict(p) for p in data.get('players', [])],
            teams=[Team.from_dict(t) for t in data.get('teams', [])],
            matches=[Match.from_dict(m) for m in data.get('matches', [])],
            groups=[Group.from_dict(g) for g in data.get('groups', [])],
            is_draw_done=data.get('is_draw_done', False),
            has_third_place_match=data.get('has_third_place_match', True),
            teams_per_group=data.get('teams_per_group', 4),
            advance_per_group=data.get('advance_per_group', 2),
        )

    def __repr__(self):
        return (f"EventCategory(id={self.id}, name={self.name}, event_type={self.event_type}, "
                f"format={self.format}, teams={len(self.teams)}, matches={len(self.matches)})")
