"""Tests for repositories, caches and account sessions."""

import asyncio

import pytest

from src.core.exceptions import BackendError, NotFoundError, QuotaExceededError, ValidationError
from src.models import (
    OnboardingUpdate,
    PortfolioSettingsUpdate,
    ProjectDraft,
    ProjectStatus,
    ProjectUpdate,
    ProposalDraft,
    ProposalStatus,
    ProposalUpdate,
    QuickProjectDraft,
    TemplateKind,
)
from src.repositories import ListCache, SessionRegistry

USER_ID = "user-1"


# ===========================================
# Cache
# ===========================================

class TestListCache:

    def test_events_published_for_every_mutation(self):
        cache = ListCache("things", key=lambda r: r["id"])
        events = []
        cache.subscribe(events.append)

        cache.replace_all([{"id": "a"}])
        cache.prepend({"id": "b"})
        cache.replace({"id": "a", "v": 2})
        cache.discard("b")
        cache.clear()

        assert [e.kind for e in events] == ["loaded", "created", "updated", "removed", "cleared"]
        assert events[1].record_id == "b"

    def test_unsubscribe(self):
        cache = ListCache("things", key=lambda r: r["id"])
        events = []
        unsubscribe = cache.subscribe(events.append)
        unsubscribe()

        cache.prepend({"id": "a"})
        assert events == []

    def test_failing_listener_does_not_break_others(self):
        cache = ListCache("things", key=lambda r: r["id"])
        events = []

        def broken(event):
            raise RuntimeError("boom")

        cache.subscribe(broken)
        cache.subscribe(events.append)
        cache.prepend({"id": "a"})

        assert len(events) == 1


# ===========================================
# Projects
# ===========================================

class TestProjectRepository:

    async def test_create_derives_status_and_prepends(self, session, complete_project_data):
        repo = session.projects
        first = await repo.create(ProjectDraft(title="Rascunho"))
        second = await repo.create(ProjectDraft(**complete_project_data))

        assert first.status == ProjectStatus.DRAFT
        assert second.status == ProjectStatus.COMPLETE
        assert [p.id for p in repo.cache.items] == [second.id, first.id]
        assert repo.get_by_id(second.id).stages.result.description == "Vendas 30% maiores."

    async def test_list_newest_first(self, session):
        await session.projects.create(ProjectDraft(title="A"))
        await session.projects.create(ProjectDraft(title="B"))
        session.projects.cache.clear()

        projects = await session.projects.list()
        assert [p.title for p in projects] == ["B", "A"]

    async def test_empty_title_rejected_before_write(self, session, fake_db):
        with pytest.raises(ValidationError):
            await session.projects.create(ProjectDraft(title="  "))
        assert fake_db.writes("projects") == []

    async def test_update_recomputes_status(self, session, complete_project_data):
        project = await session.projects.create(ProjectDraft(**complete_project_data))

        updated = await session.projects.update(project.id, ProjectUpdate(images=[]))

        assert updated.status == ProjectStatus.DRAFT
        assert session.projects.get_by_id(project.id).status == ProjectStatus.DRAFT
        assert updated.title == complete_project_data["title"]

    async def test_update_sends_only_provided_fields(self, session, fake_db):
        project = await session.projects.create(ProjectDraft(title="A"))
        await session.projects.update(project.id, ProjectUpdate(description="Nova"))

        _, _, _, row = fake_db.writes("projects")[-1]
        assert set(row) == {"description", "status", "updated_at"}

    async def test_failed_write_leaves_cache_unchanged(self, session, fake_db):
        project = await session.projects.create(ProjectDraft(title="A"))
        fake_db.fail_writes = True

        with pytest.raises(BackendError):
            await session.projects.update(project.id, ProjectUpdate(title="B"))
        assert session.projects.get_by_id(project.id).title == "A"

    async def test_remove(self, session):
        project = await session.projects.create(ProjectDraft(title="A"))
        await session.projects.remove(project.id)

        assert session.projects.get_by_id(project.id) is None
        with pytest.raises(NotFoundError):
            await session.projects.remove(project.id)

    async def test_sync_display_order(self, session, fake_db):
        a = await session.projects.create(ProjectDraft(title="A"))
        b = await session.projects.create(ProjectDraft(title="B"))

        ordered = await session.projects.sync_display_order([b.id, a.id])

        assert [p.id for p in ordered] == [b.id, a.id]
        stored = {r["id"]: r["display_order"] for r in fake_db.tables["projects"]}
        assert stored == {b.id: 0, a.id: 1}

    async def test_null_lists_and_stages_are_ignored(self, session, fake_db, complete_project_data):
        project = await session.projects.create(ProjectDraft(**complete_project_data))

        patch = ProjectUpdate.model_validate({"images": None, "stages": None, "technologies": None})
        updated = await session.projects.update(project.id, patch)

        assert updated.status == ProjectStatus.COMPLETE
        assert updated.images == complete_project_data["images"]
        assert updated.stages.briefing.description == "Modernizar a marca."
        _, _, _, row = fake_db.writes("projects")[-1]
        assert set(row) == {"status", "updated_at"}

    async def test_null_description_and_video_clear_them(self, session, complete_project_data):
        project = await session.projects.create(ProjectDraft(**complete_project_data))

        patch = ProjectUpdate.model_validate({"description": None, "video_url": None})
        updated = await session.projects.update(project.id, patch)

        assert updated.description == ""
        assert updated.video_url is None
        assert updated.status == ProjectStatus.DRAFT

    async def test_null_title_rejected(self, session, fake_db):
        project = await session.projects.create(ProjectDraft(title="A"))
        with pytest.raises(ValidationError):
            await session.projects.update(project.id, ProjectUpdate.model_validate({"title": None}))
        assert len(fake_db.writes("projects")) == 1

    async def test_new_project_goes_last_in_fresh_session(self, session, fake_db):
        for index in range(2):
            fake_db.tables["projects"].append({
                "id": f"old-{index}",
                "user_id": USER_ID,
                "title": f"Antigo {index}",
                "display_order": index,
                "created_at": f"2023-01-0{index + 1}T00:00:00+00:00",
            })

        project = await session.projects.create(ProjectDraft(title="Novo"))

        assert project.display_order == 2
        assert [p.id for p in session.projects.cache.items] == [project.id, "old-1", "old-0"]

    async def test_concurrent_updates_last_response_wins(self, session, fake_db):
        project = await session.projects.create(ProjectDraft(title="Original", description="Texto"))

        release = asyncio.Event()
        store_update = fake_db.update
        calls = []

        async def out_of_order_update(table, filters, updates):
            first = not calls
            calls.append(updates)
            if first:
                await release.wait()
            stored = await store_update(table, filters, updates)
            if not first:
                release.set()
            return stored

        fake_db.update = out_of_order_update

        await asyncio.gather(
            session.projects.update(project.id, ProjectUpdate(title="Primeiro")),
            session.projects.update(project.id, ProjectUpdate(description="Segundo")),
        )

        cached = session.projects.get_by_id(project.id)
        assert cached.title == "Primeiro"
        assert cached.description == "Texto"
        stored = fake_db.tables["projects"][0]
        assert (stored["title"], stored["description"]) == ("Primeiro", "Segundo")


class TestQuickCreate:

    async def test_caps_images_and_maps_stages(self, session):
        quick = QuickProjectDraft(
            title="Landing Aurora",
            images=[f"https://img.test/{n}.jpg" for n in range(5)],
            problem="Conversão baixa.",
            solution="Nova landing page.",
            metrics="+40% de leads",
            technologies=["Figma", "Figma", "Webflow"],
        )

        project = await session.projects.quick_create(quick)

        assert len(project.images) == 3
        assert project.stages.briefing.description == "Conversão baixa."
        assert project.stages.challenge.description == "Nova landing page."
        assert project.stages.execution.description == ""
        assert project.stages.result.description == "+40% de leads"
        assert project.technologies == ["Figma", "Webflow"]

    async def test_result_line_fills_description(self, session):
        project = await session.projects.quick_create(QuickProjectDraft(
            title="App",
            images=["https://img.test/app.jpg"],
            problem="Fila longa.",
            result="Atendimento 2x mais rápido",
            metrics="ignorado",
        ))

        assert project.description == "Atendimento 2x mais rápido"
        assert project.stages.result.description == "Atendimento 2x mais rápido"
        assert project.status == ProjectStatus.COMPLETE

    @pytest.mark.parametrize("fields", [
        {"title": "Sem imagem"},
        {"title": " ", "images": ["https://img.test/a.jpg"]},
    ])
    async def test_requires_title_and_image(self, session, fake_db, fields):
        with pytest.raises(ValidationError):
            await session.projects.quick_create(QuickProjectDraft(**fields))
        assert fake_db.writes("projects") == []


# ===========================================
# Proposals
# ===========================================

class TestProposalRepository:

    async def test_create_computes_total(self, session, proposal_data):
        proposal = await session.proposals.create(ProposalDraft(**proposal_data))

        assert proposal.total_value == 3500
        assert proposal.status == ProposalStatus.DRAFT
        assert proposal.share_token is None
        assert session.profiles.current.proposal_count == 1

    async def test_update_budget_recomputes_total(self, session, proposal_data):
        proposal = await session.proposals.create(ProposalDraft(**proposal_data))

        updated = await session.proposals.update(
            proposal.id,
            ProposalUpdate(budget_items=[{"description": "Site", "quantity": 2, "unitPrice": 800}])
        )

        assert updated.total_value == 1600
        assert updated.budget_items[0].total == 1600

    async def test_update_without_budget_keeps_total(self, session, proposal_data):
        proposal = await session.proposals.create(ProposalDraft(**proposal_data))
        updated = await session.proposals.update(proposal.id, ProposalUpdate(closing="Até breve"))
        assert updated.total_value == 3500

    async def test_null_budget_is_ignored(self, session, fake_db, proposal_data):
        proposal = await session.proposals.create(ProposalDraft(**proposal_data))

        patch = ProposalUpdate.model_validate(
            {"budget_items": None, "title": None, "closing": None, "client_name": None}
        )
        updated = await session.proposals.update(proposal.id, patch)

        assert updated.total_value == 3500
        assert len(updated.budget_items) == 2
        assert updated.title == "Identidade visual"
        assert updated.client_name is None
        _, _, _, row = fake_db.writes("proposals")[-1]
        assert "budget_items" not in row and "title" not in row

    async def test_free_quota_blocks_without_writing(self, session, fake_db):
        fake_db.tables["profiles"][0]["proposal_count"] = 5

        await session.profiles.load()
        assert session.proposals.can_create_proposal is False
        assert session.proposals.remaining_proposals == 0

        with pytest.raises(QuotaExceededError):
            await session.proposals.create(ProposalDraft(title="Sexta"))
        assert fake_db.writes("proposals") == []

    async def test_pro_plan_is_unlimited(self, session, fake_db):
        fake_db.tables["profiles"][0].update(plan="pro", proposal_count=50)

        await session.profiles.load()
        assert session.proposals.can_create_proposal is True
        assert session.proposals.remaining_proposals is None

    async def test_duplicate_is_fresh_draft(self, session, proposal_data):
        original = await session.proposals.create(ProposalDraft(**proposal_data))
        await session.proposals.publish(original.id)

        copy = await session.proposals.duplicate(original.id)

        assert copy.id != original.id
        assert copy.title == "Identidade visual (cópia)"
        assert copy.status == ProposalStatus.DRAFT
        assert copy.share_token is None
        assert copy.total_value == original.total_value

    async def test_publish_is_idempotent(self, session, proposal_data):
        proposal = await session.proposals.create(ProposalDraft(**proposal_data))

        first = await session.proposals.publish(proposal.id)
        second = await session.proposals.publish(proposal.id)

        assert first.share_token == second.share_token
        assert first.share_url == f"https://portfol.test/p/{first.share_token}"
        assert second.status == ProposalStatus.SENT
        assert session.proposals.get_by_id(proposal.id).status == ProposalStatus.SENT


# ===========================================
# Settings and profile
# ===========================================

class TestSettingsRepository:

    async def test_defaults_before_first_save(self, session):
        settings = await session.settings.load()
        assert settings.template == TemplateKind.CASE
        assert settings.primary_color == "#8B5CF6"
        assert settings.columns == 2

    async def test_upsert_never_duplicates(self, session, fake_db):
        await session.settings.update(PortfolioSettingsUpdate(template=TemplateKind.GALLERY))
        await session.settings.update(PortfolioSettingsUpdate(columns=3))
        await session.settings.reorder_projects(["p2", "p1"])

        rows = fake_db.tables["portfolio_settings"]
        assert len(rows) == 1
        assert rows[0]["template"] == "gallery"
        assert rows[0]["columns"] == 3
        assert rows[0]["project_order"] == ["p2", "p1"]

    async def test_null_values_keep_current_settings(self, session, fake_db):
        await session.settings.update(PortfolioSettingsUpdate(template=TemplateKind.SLIDES, columns=3))

        patch = PortfolioSettingsUpdate.model_validate(
            {"template": None, "columns": None, "font": None, "primary_color": "#111111"}
        )
        settings = await session.settings.update(patch)

        assert settings.template == TemplateKind.SLIDES
        assert settings.columns == 3
        assert settings.font == "DM Sans"
        assert fake_db.tables["portfolio_settings"][0]["template"] == "slides"
        assert fake_db.tables["portfolio_settings"][0]["primary_color"] == "#111111"


class TestProfileRepository:

    async def test_onboarding_flow(self, session, fake_db):
        await session.profiles.update_onboarding(OnboardingUpdate(niche="Motion"))
        await session.profiles.save_generated_profile("Bio gerada")
        profile = await session.profiles.complete_onboarding()

        row = fake_db.tables["profiles"][0]
        assert row["niche"] == "Motion"
        assert row["bio"] == "Bio gerada"
        assert row["onboarding_complete"] is True
        assert profile.onboarding.generated_profile == "Bio gerada"
        assert profile.onboarding.is_complete


# ===========================================
# Sessions
# ===========================================

class TestSessionRegistry:

    async def test_sign_out_clears_caches(self, fake_db):
        registry = SessionRegistry(fake_db)
        account = registry.open(USER_ID)
        await account.projects.create(ProjectDraft(title="A"))

        assert registry.open(USER_ID) is account
        assert registry.close(USER_ID) is True
        assert len(account.projects.cache) == 0
        assert registry.get(USER_ID) is None
        assert registry.close(USER_ID) is False

    async def test_sessions_do_not_share_caches(self, fake_db):
        registry = SessionRegistry(fake_db)
        first = registry.open(USER_ID)
        second = registry.open("user-2")

        await first.projects.create(ProjectDraft(title="A"))
        assert len(second.projects.cache) == 0
