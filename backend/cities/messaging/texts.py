"""User-facing texts sent to chat rooms."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cities.logic.achievements import ACHIEVEMENTS
from cities.logic.enums import EndReason, MoveRejection
from cities.logic.exceptions import WrongLetterError
from cities.logic.leaderboard import format_leaderboard, points_word

if TYPE_CHECKING:
    from cities.logic.achievements import Achievement
    from cities.logic.exceptions import MoveRejectedError
    from cities.logic.types import AcceptedMove, GameEndResult
    from shared.dal.models import PlayerStats

WELCOME = 'Добро пожаловать в игру "Города"! Используйте /join для присоединения к игре.'

HELP_TEMPLATE = """\
Добро пожаловать в игру "Города" 🌃!

Доступные команды 🔗:
/start -- Начать игру.
/join -- Присоединиться к игре.
/help -- Показать это сообщение.
/leave -- Покинуть игру во время фазы присоединения.
/mystats -- Показать статистику игрока.
/showachievements -- Показать список достижений.

Правила игры ☕️:
1. Каждый новый город должен начинаться на последнюю букву предыдущего города.
2. Нельзя повторять города, которые уже были названы.
3. Игра продолжается до тех пор, пока кто-нибудь не наберёт {win_score} {points}.
4. Называть можно только существующие города.

Удачи и веселой игры! 🍪"""

GAME_ALREADY_STARTED = "Игра уже началась. Дождитесь следующей игры."
ALREADY_JOINED = "{name}, вы уже в игре."
NOTHING_TO_LEAVE = "Нет активной фазы вступления в игру, из которой можно выйти."
NOT_JOINED = "Вы не присоединились к игре."
PLAYER_LEFT = "{name} вышел из игры."
ALL_LEFT = "Все игроки покинули игру. Игра отменена."
NO_PLAYERS = "Никто не присоединился. Игра отменена."
WAIT_FOR_JOIN_END = "Пожалуйста, дождитесь окончания фазы присоединения игроков."
INVALID_INPUT = "Напишите название города."
UNKNOWN_CITY = "Такого города не существует. Попробуйте другой."
ALREADY_USED = "Этот город уже был назван. Попробуйте другой."
WRONG_LETTER = 'Город должен начинаться на букву "{letter}".'
NO_STATS = "У вас еще нет статистики. Сыграйте пару игр."


def help_text(win_score: int) -> str:
    return HELP_TEMPLATE.format(win_score=win_score, points=points_word(win_score))


def roster(player_names: list[str], remaining_seconds: int) -> str:
    return f"Игроки: {', '.join(player_names)}\nИгра начнется через {remaining_seconds} сек."


def game_started(player_names: list[str]) -> str:
    return f"Игра началась! Удачи!\nИгроки: {', '.join(player_names)}\nНазовите любой город."


def rejection(error: MoveRejectedError) -> str:
    if error.rejection == MoveRejection.UNKNOWN_CITY:
        return UNKNOWN_CITY
    if error.rejection == MoveRejection.ALREADY_USED:
        return ALREADY_USED
    if isinstance(error, WrongLetterError):
        return WRONG_LETTER.format(letter=error.expected_letter.upper())
    return str(error)


def move_accepted(move: AcceptedMove) -> str:
    return (
        f"Отлично, {move.player.name} +1 очко.\n"
        f"Текущий счет: {move.score} {points_word(move.score)}! "
        f'Следующий город на букву "{move.next_letter.upper()}".'
    )


def game_over(result: GameEndResult) -> str:
    if result.reason == EndReason.NO_PLAYERS:
        return NO_PLAYERS
    if result.reason == EndReason.ALL_LEFT:
        return ALL_LEFT

    header = "Игра завершена из-за отсутствия активности." if result.reason == EndReason.INACTIVITY else "Игра окончена!"
    lines = [header]
    if result.winner is not None:
        lines.append(f"Победитель: {result.winner.name} 🏆")
    lines.append("Результаты:")
    lines.append(format_leaderboard(result.standings))
    return "\n".join(lines)


def achievement_unlocked(name: str, achievement: Achievement) -> str:
    return f'🎉 {name} получает достижение "{achievement.name}"!'


def win_milestone(name: str, wins: int) -> str:
    return f"🎉 {name} достиг {wins} побед!"


def achievements_list() -> str:
    blocks = [f"{a.name}: {a.description}\nНеобходимо: {a.threshold}" for a in ACHIEVEMENTS]
    return "Достижения:\n\n" + "\n\n".join(blocks)


def player_stats(name: str, stats: PlayerStats) -> str:
    top = ", ".join(f"{city} ({count} раз)" for city, count in stats.top_cities()) or "пока нет"
    return (
        f"Статистика игрока {name}:\n\n"
        f"Названо городов: {stats.cities_named}\n"
        f"Побед: {stats.wins}\n"
        f"Побед подряд: {stats.consecutive_wins}\n"
        f"Всего игр: {stats.total_games_played}\n\n"
        f"Любимые города: {top}"
    )
