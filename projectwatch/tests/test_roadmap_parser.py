import unittest

from projectwatch.models import PhaseStatus, Step
from projectwatch.parsers.roadmap import (
    LineKind,
    ParserState,
    classify_line,
    compute_progress,
    parse_document,
    split_frontmatter,
    status_for_progress,
    strip_extension,
)


MILESTONE_DOC = """# Milestone 1: Setup
## Install
- [x] Install deps
- [ ] Configure CI
# Milestone 2: Build
- [x] Compile
"""


class LineClassifierTests(unittest.TestCase):
    def test_phase_header_keywords_and_separators(self) -> None:
        cases = [
            ("# Milestone 1: Setup", 1, "Setup"),
            ("## Phase 2 - Build", 2, "Build"),
            ("# Part 3. Polish", 3, "Polish"),
            ("## step 4 Ship it", 4, "Ship it"),
            ("# PHASE 10: Launch", 10, "Launch"),
        ]
        for line, order, name in cases:
            with self.subTest(line=line):
                token = classify_line(line)
                self.assertEqual(token.kind, LineKind.PHASE_HEADER)
                self.assertEqual(token.order, order)
                self.assertEqual(token.text, name)

    def test_phase_header_takes_precedence_over_heading_and_stage(self) -> None:
        self.assertEqual(classify_line("# Phase 1: Setup").kind, LineKind.PHASE_HEADER)
        self.assertEqual(classify_line("## Phase 1: Setup").kind, LineKind.PHASE_HEADER)

    def test_three_markers_with_keyword_is_a_stage(self) -> None:
        token = classify_line("### Phase 1: Setup")
        self.assertEqual(token.kind, LineKind.STAGE_HEADER)
        self.assertEqual(token.text, "Phase 1: Setup")

    def test_headings_and_stages(self) -> None:
        self.assertEqual(classify_line("# Project Roadmap"), classify_line("# Project Roadmap  "))
        self.assertEqual(classify_line("# Project Roadmap").kind, LineKind.HEADING)
        self.assertEqual(classify_line("## Backend").kind, LineKind.STAGE_HEADER)
        self.assertEqual(classify_line("### Backend").kind, LineKind.STAGE_HEADER)
        self.assertEqual(classify_line("#### Too deep").kind, LineKind.PLAIN_TEXT)
        self.assertEqual(classify_line("#hashtag").kind, LineKind.PLAIN_TEXT)

    def test_checkbox_case_and_strictness(self) -> None:
        self.assertEqual(classify_line("- [x] Done").kind, LineKind.CHECKED_ITEM)
        self.assertEqual(classify_line("- [X] Done").kind, LineKind.CHECKED_ITEM)
        self.assertEqual(classify_line("- [ ] Todo").kind, LineKind.UNCHECKED_ITEM)
        self.assertEqual(classify_line("  * [ ] Nested").text, "Nested")
        self.assertEqual(classify_line("- [ X ] Spaced").kind, LineKind.PLAIN_TEXT)
        self.assertEqual(classify_line("- plain bullet").kind, LineKind.PLAIN_TEXT)
        self.assertEqual(classify_line("Some narrative text.").kind, LineKind.PLAIN_TEXT)


class ProgressHelperTests(unittest.TestCase):
    def test_progress_and_status(self) -> None:
        self.assertEqual(compute_progress(0, 0), 0.0)
        self.assertEqual(compute_progress(1, 2), 50.0)
        self.assertEqual(compute_progress(3, 3), 100.0)
        self.assertEqual(status_for_progress(0.0), PhaseStatus.NOT_STARTED)
        self.assertEqual(status_for_progress(0.5), PhaseStatus.IN_PROGRESS)
        self.assertEqual(status_for_progress(100.0), PhaseStatus.COMPLETED)

    def test_strip_extension(self) -> None:
        self.assertEqual(strip_extension("ROADMAP.md"), "ROADMAP")
        self.assertEqual(strip_extension("plan.MARKDOWN"), "plan")
        self.assertEqual(strip_extension("notes.txt"), "notes.txt")
        self.assertEqual(strip_extension(".md"), ".md")


class ParserStateTests(unittest.TestCase):
    def test_steps_without_phase_are_orphans_even_under_a_held_stage(self) -> None:
        state = ParserState()
        state.open_new_stage("Backlog")
        state.add_step(Step(content="a"))
        self.assertEqual([s.content for s in state.orphan_steps], ["a"])
        self.assertIsNotNone(state.open_stage)
        self.assertEqual(state.open_stage.steps, [])

    def test_opening_phase_closes_stage_into_previous_phase(self) -> None:
        state = ParserState()
        state.open_new_phase("One", 1)
        state.open_new_stage("Design")
        state.add_step(Step(content="sketch", is_completed=True))
        state.open_new_phase("Two", 2)
        self.assertEqual(len(state.phases), 1)
        self.assertEqual(state.phases[0].stages[0].name, "Design")
        self.assertIsNone(state.open_stage)
        self.assertEqual(state.open_phase.name, "Two")

    def test_tasks_stage_is_reused(self) -> None:
        state = ParserState()
        state.open_new_phase("One", 1)
        state.add_step(Step(content="a"))
        state.add_step(Step(content="b"))
        phases = state.finish("doc")
        self.assertEqual([stage.name for stage in phases[0].stages], ["Tasks"])
        self.assertEqual(len(phases[0].stages[0].steps), 2)


class ParseDocumentTests(unittest.TestCase):
    def test_milestone_scenario(self) -> None:
        phases = parse_document(MILESTONE_DOC, "ROADMAP.md")
        self.assertEqual([p.order for p in phases], [1, 2])

        setup, build = phases
        self.assertEqual(setup.name, "Setup")
        self.assertEqual(setup.progress, 50.0)
        self.assertEqual(setup.status, PhaseStatus.IN_PROGRESS)
        self.assertEqual([s.name for s in setup.stages], ["Install"])
        self.assertEqual(
            [(step.content, step.is_completed) for step in setup.stages[0].steps],
            [("Install deps", True), ("Configure CI", False)],
        )

        self.assertEqual(build.name, "Build")
        self.assertEqual(build.progress, 100.0)
        self.assertEqual(build.status, PhaseStatus.COMPLETED)
        self.assertEqual([s.name for s in build.stages], ["Tasks"])
        self.assertEqual(build.stages[0].steps[0].content, "Compile")

    def test_checklist_only_document_named_after_file(self) -> None:
        text = "- [ ] first\n- [x] second\n* [X] third\n"
        phases = parse_document(text, "TODO.md")
        self.assertEqual(len(phases), 1)
        phase = phases[0]
        self.assertEqual(phase.name, "TODO")
        self.assertEqual(phase.order, 0)
        self.assertEqual([s.name for s in phase.stages], ["Tasks"])
        self.assertEqual([s.content for s in phase.stages[0].steps], ["first", "second", "third"])
        self.assertAlmostEqual(phase.progress, 200 / 3)

    def test_top_level_heading_names_synthesized_phase(self) -> None:
        text = "# Launch Checklist\n\nIntro text.\n\n- [x] Domain\n- [ ] DNS\n"
        phases = parse_document(text, "launch.md")
        self.assertEqual(len(phases), 1)
        self.assertEqual(phases[0].name, "Launch Checklist")
        self.assertEqual(phases[0].stages[0].name, "Tasks")

    def test_last_top_level_heading_wins(self) -> None:
        text = "# First\n- [ ] a\n# Second\n- [ ] b\n"
        phases = parse_document(text, "x.md")
        self.assertEqual(phases[0].name, "Second")

    def test_phase_header_does_not_update_fallback_heading(self) -> None:
        state = ParserState()
        state.feed("# Phase 1: Setup")
        self.assertIsNone(state.last_heading)

    def test_orphans_dropped_when_document_has_phases(self) -> None:
        text = "- [x] early\n# Phase 1: Real\n- [ ] later\n"
        phases = parse_document(text, "plan.md")
        self.assertEqual(len(phases), 1)
        steps = [step.content for stage in phases[0].stages for step in stage.steps]
        self.assertEqual(steps, ["later"])

    def test_stage_without_phase_is_discarded(self) -> None:
        text = "## Preamble\n- [ ] orphan\n## Phase 1: Start\n### Work\n- [x] go\n"
        phases = parse_document(text, "plan.md")
        self.assertEqual(len(phases), 1)
        self.assertEqual([s.name for s in phases[0].stages], ["Work"])

    def test_stage_only_document_collects_orphans(self) -> None:
        text = "## Backlog\n- [ ] one\n- [ ] two\n"
        phases = parse_document(text, "backlog.md")
        self.assertEqual(len(phases), 1)
        self.assertEqual(phases[0].name, "backlog")
        self.assertEqual([s.name for s in phases[0].stages], ["Tasks"])
        self.assertEqual(phases[0].status, PhaseStatus.NOT_STARTED)

    def test_tasks_stage_precedes_later_explicit_stages(self) -> None:
        text = "# Phase 1: Mixed\n- [x] loose\n## Named\n- [ ] inside\n"
        phases = parse_document(text, "plan.md")
        self.assertEqual([s.name for s in phases[0].stages], ["Tasks", "Named"])

    def test_phase_without_steps_is_not_started(self) -> None:
        phases = parse_document("# Phase 3: Later\nNothing here yet.\n", "plan.md")
        self.assertEqual(len(phases), 1)
        self.assertEqual(phases[0].progress, 0.0)
        self.assertEqual(phases[0].status, PhaseStatus.NOT_STARTED)
        self.assertEqual(phases[0].stages, [])

    def test_document_without_structure_yields_nothing(self) -> None:
        self.assertEqual(parse_document("Just prose.\n\n| a | b |\n", "README.md"), [])
        self.assertEqual(parse_document("", "empty.md"), [])

    def test_status_always_matches_progress(self) -> None:
        text = MILESTONE_DOC + "## Phase 3: Later\n- [ ] x\n"
        for phase in parse_document(text, "r.md"):
            self.assertGreaterEqual(phase.progress, 0)
            self.assertLessEqual(phase.progress, 100)
            self.assertEqual(phase.status, status_for_progress(phase.progress))

    def test_reparsing_is_idempotent(self) -> None:
        first = parse_document(MILESTONE_DOC, "ROADMAP.md")
        second = parse_document(MILESTONE_DOC, "ROADMAP.md")
        self.assertEqual(
            [p.model_dump() for p in first],
            [p.model_dump() for p in second],
        )

    def test_crlf_line_endings(self) -> None:
        phases = parse_document(MILESTONE_DOC.replace("\n", "\r\n"), "ROADMAP.md")
        self.assertEqual([p.name for p in phases], ["Setup", "Build"])


class FrontmatterTests(unittest.TestCase):
    def test_frontmatter_title_is_fallback_after_heading(self) -> None:
        text = "---\ntitle: Sprint Plan\nstatus: active\n---\n- [ ] a\n"
        phases = parse_document(text, "sprint.md")
        self.assertEqual(phases[0].name, "Sprint Plan")

        with_heading = "---\ntitle: Sprint Plan\n---\n# Sprint 7\n- [ ] a\n"
        self.assertEqual(parse_document(with_heading, "sprint.md")[0].name, "Sprint 7")

    def test_invalid_frontmatter_is_kept_in_body(self) -> None:
        text = "---\ntitle: [unclosed\n---\n- [ ] a\n"
        fm, body = split_frontmatter(text)
        self.assertEqual(fm, {})
        self.assertEqual(body, text)
        self.assertEqual(parse_document(text, "b.md")[0].name, "b")

    def test_non_mapping_block_between_rules_is_kept_in_body(self) -> None:
        text = "---\n- [x] Done item\n- [ ] Todo item\n---\n"
        fm, body = split_frontmatter(text)
        self.assertEqual(fm, {})
        self.assertEqual(body, text)

        phases = parse_document(text, "TODO.md")
        self.assertEqual(len(phases), 1)
        self.assertEqual(phases[0].name, "TODO")
        self.assertEqual(
            [(s.content, s.is_completed) for s in phases[0].stages[0].steps],
            [("Done item", True), ("Todo item", False)],
        )

    def test_horizontal_rules_do_not_hide_phase_headers(self) -> None:
        text = "---\n# Phase 1: Setup\n- [x] a\n---\n# Phase 2: Build\n- [ ] b\n"
        phases = parse_document(text, "plan.md")
        self.assertEqual([p.order for p in phases], [1, 2])
        self.assertEqual(phases[0].stages[0].steps[0].content, "a")
        self.assertEqual(phases[0].status, PhaseStatus.COMPLETED)

    def test_text_without_frontmatter_is_untouched(self) -> None:
        fm, body = split_frontmatter("# Title\n---\n")
        self.assertEqual(fm, {})
        self.assertEqual(body, "# Title\n---\n")


if __name__ == "__main__":
    unittest.main()
